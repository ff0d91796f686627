import logging
from typing import Any
from pydantic import ConfigDict, BaseModel

_LOGGER = logging.getLogger(__name__)


class BaseEntity(BaseModel):
    """
    Base class for all entities in the morpholabels package.

    This class provides common functionality for all entities, such as
    serialization to dictionaries under their public (aliased) keys, as well as
    handling unknown fields gracefully.
    """

    model_config = ConfigDict(extra='allow',  # Allow extra fields not defined in the model
                              populate_by_name=True)

    def asdict(self) -> dict[str, Any]:
        """Convert the entity to a dictionary, including unknown fields."""
        return self.model_dump(by_alias=True)

    def asjson(self) -> str:
        """Convert the entity to a JSON string, including unknown fields."""
        return self.model_dump_json(by_alias=True)

    def model_post_init(self, __context: Any) -> None:
        if self.__pydantic_extra__:
            _LOGGER.warning(f"Unknown fields found in {self.__class__.__name__} "
                            f"fields: {self.__pydantic_extra__.keys()}. ")
