from .annotation_dto import domain_to_wire, wire_to_domain

__all__ = [
    'domain_to_wire',
    'wire_to_domain',
]
