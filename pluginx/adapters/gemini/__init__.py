from pluginx.adapters.gemini.target import GeminiTargetAdapter

__all__ = ["GeminiTargetAdapter"]
