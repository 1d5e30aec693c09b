"""
Shared AI Prompt Templates

Prompt templates shared by every AI provider, so the output format does
not depend on which backend generated it.
"""

from .optimize_resume import build_optimize_resume_prompt

__all__ = [
    'build_optimize_resume_prompt',
]
