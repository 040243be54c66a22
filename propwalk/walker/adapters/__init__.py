from propwalk.walker.adapters.click_adapter import ClickPromptAdapter
from propwalk.walker.adapters.scripted import DEFAULT, ScriptedPromptAdapter

__all__ = ["ClickPromptAdapter", "DEFAULT", "ScriptedPromptAdapter"]
