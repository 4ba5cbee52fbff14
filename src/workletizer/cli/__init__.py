"""
CLI Subpackage.

Contains the application entry-points and command handlers for the command-line interface.

Modules:
    - ``__main__``: The argparse definition and dispatcher.
    - ``commands``: Facade over the handlers.
    - ``handlers``: One module per sub-command (`transform`, `inspect`).
"""
