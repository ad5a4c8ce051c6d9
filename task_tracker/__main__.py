"""Entry point: python -m task_tracker"""

from .main import run

run()
