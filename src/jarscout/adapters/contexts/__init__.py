"""Host adapters implementing LoadingContext."""

from jarscout.adapters.contexts.host_object import HostObjectContext, adapt
from jarscout.adapters.contexts.path_list import PathListContext, default_context


__all__ = ["HostObjectContext", "PathListContext", "adapt", "default_context"]
