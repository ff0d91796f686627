import logging
import logging.config
from importlib import resources
import yaml
from rich.console import ConsoleRenderable
from rich.logging import RichHandler
from rich.traceback import Traceback

_LOGGER = logging.getLogger(__name__)

_LOGGING_CONFIG_RESOURCE = 'logging.yaml'


class ConditionalRichHandler(RichHandler):
    """
    Rich handler that shows the level column only for WARNING and above,
    so user-facing INFO lines print as plain messages.
    """

    def render(self, *, record: logging.LogRecord,
               traceback: Traceback | None,
               message_renderable: ConsoleRenderable) -> ConsoleRenderable:
        self._log_render.show_level = record.levelno >= logging.WARNING
        try:
            return super().render(record=record, traceback=traceback, message_renderable=message_renderable)
        finally:
            self._log_render.show_level = False


def load_cmdline_logging_config() -> None:
    """Apply the packaged logging configuration used by the command line tools."""
    config_text = resources.files('morpholabels').joinpath(_LOGGING_CONFIG_RESOURCE).read_text()
    logging.config.dictConfig(yaml.safe_load(config_text))
    _LOGGER.debug("Command line logging configuration loaded.")
