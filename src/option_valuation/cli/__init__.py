from .arguments import (
    add_config_arg,
    add_model_arg,
    add_print_config_arg,
    pricing_overrides_from_args,
    print_config,
    resolve_path,
)
from .logging import (
    add_logging_args,
    logging_overrides_from_args,
    setup_logging_from_config,
)

__all__ = [
    "add_config_arg",
    "add_logging_args",
    "add_model_arg",
    "add_print_config_arg",
    "logging_overrides_from_args",
    "pricing_overrides_from_args",
    "print_config",
    "resolve_path",
    "setup_logging_from_config",
]
