from .plan_tools import register_plan_tools

__all__ = ["register_plan_tools"]
