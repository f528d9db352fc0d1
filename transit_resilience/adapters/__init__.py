"""
Adapters Package

Inbound (CLI) and outbound (dataset, file, console) adapters.
"""
