import importlib

from shopledger.models.record import CollectionVersion, Record


def import_all_models() -> None:
    for module_name in ("shopledger.models.record",):
        importlib.import_module(module_name)


__all__ = ["CollectionVersion", "Record", "import_all_models"]
