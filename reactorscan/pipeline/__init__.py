"""Analysis bootstrap pipeline."""
from .structures import BootstrapOutcome, EngineEntryPoint
from .factory import BootstrapperFactory
from .bootstrapper import Bootstrapper
from .ui import console, print_warning, print_properties, print_status_panel

__all__ = [
    "BootstrapOutcome", "EngineEntryPoint", "BootstrapperFactory", "Bootstrapper",
    "console", "print_warning", "print_properties", "print_status_panel",
]
