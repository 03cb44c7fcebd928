"""Shared constants for documentation prompting."""

from __future__ import annotations

MAX_DIFF_CHARS = 2000
COMMIT_ID_PREFIX = 7

SYSTEM_PROMPT = (
    "You are an expert technical writer and Azure solutions architect. Generate clear, "
    "comprehensive documentation for Azure integration changes including Logic Apps, APIM "
    "policies, Service Bus, Event Hub, Azure Functions, Bicep templates, and Terraform "
    "configurations.\n"
    "\n"
    "Focus on:\n"
    "- What changed and why\n"
    "- Integration impacts and dependencies\n"
    "- Configuration requirements"
)

SYSTEM_SECURITY = "- Security considerations and compliance impacts"
SYSTEM_COST = "- Cost implications of the changes"
SYSTEM_DIAGRAM = "- Mermaid diagram suggestions for architecture visualization"

SYSTEM_CLOSING = (
    "Use clear, professional language suitable for both technical and management audiences."
)

OUTLINE_BASE: tuple[str, ...] = (
    "1. **Executive Summary** - High-level overview for management",
    "2. **Technical Summary** - Detailed changes for developers",
    "3. **Files Changed** - Per-file analysis with descriptions",
    "4. **Integration Impact** - Downstream effects and dependencies",
    "5. **Configuration Requirements** - Environment variables, secrets, connection strings",
)
OUTLINE_SECURITY = "6. **Security Considerations** - Authentication, authorization, data protection"
OUTLINE_COST = "7. **Cost Impact** - Resource consumption and billing implications"
OUTLINE_DIAGRAM = "8. **Architecture Diagram** - Mermaid diagram showing integration flow"
OUTLINE_TAIL: tuple[str, ...] = (
    "9. **Testing Checklist** - Verification steps",
    "10. **Deployment Notes** - Rollout considerations",
)

CLOSING_INSTRUCTION = (
    "Generate the documentation in well-formatted Markdown with clear sections, tables "
    "where appropriate, and professional formatting."
)


__all__ = [
    "CLOSING_INSTRUCTION",
    "COMMIT_ID_PREFIX",
    "MAX_DIFF_CHARS",
    "OUTLINE_BASE",
    "OUTLINE_COST",
    "OUTLINE_DIAGRAM",
    "OUTLINE_SECURITY",
    "OUTLINE_TAIL",
    "SYSTEM_CLOSING",
    "SYSTEM_COST",
    "SYSTEM_DIAGRAM",
    "SYSTEM_PROMPT",
    "SYSTEM_SECURITY",
]
