"""
Bindings that mirror machine state into observable values.
"""

from .reactive import MachineBinding, ReactiveCell, bind_machine

__all__ = ["MachineBinding", "ReactiveCell", "bind_machine"]
