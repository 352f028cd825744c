"""
Patch Models - Structured text replacements proposed by a model

Pydantic models for text changes and the outcome of applying a batch of them.
"""

from typing import List
from pydantic import BaseModel, Field


class TextChange(BaseModel):
    """Single replacement the model wants applied to the document"""
    original: str = Field(description="Text expected to exist in the target document")
    new: str = Field(default="", description="Replacement text")


class PatchResult(BaseModel):
    """Outcome of applying a batch of text changes"""
    success: bool = Field(description="True only when every change was applied")
    text: str = Field(description="Resulting document body")
    applied_count: int = Field(default=0, ge=0, description="Number of changes spliced in")
    failed_patches: List[TextChange] = Field(
        default_factory=list,
        description="Changes whose original text could not be located"
    )
