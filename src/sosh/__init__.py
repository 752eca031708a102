"""sosh - a minimal interactive command shell.

Built-in file commands (mostra, copia, acrescenta, conta, apaga, informa,
lista, termina) run in-process; anything else is executed as an external
program found on PATH.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
