"""SkyTask: personal task tracker with AI-generated subtasks."""

__version__ = "0.1.0"
