"""task-cli - Simple task tracker that stores tasks in a local JSON file.

Installation:
    pip install -e .

Usage:
    task-cli add "Buy milk"
    task-cli list
"""

__version__ = "1.0.0"
