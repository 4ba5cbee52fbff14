"""
Command handlers of the workletizer CLI, one module per sub-command.
"""
