"""Context collapse: the first source context file becomes GEMINI.md."""

from typing import Optional

from pluginx.adapters.gemini.mappings import CONTEXT_FILE
from pluginx.models.ir import ContextFileIR


def generate_context(context_files: list[ContextFileIR]) -> Optional[ContextFileIR]:
    if not context_files:
        return None
    return ContextFileIR(filename=CONTEXT_FILE, content=context_files[0].content)
