NOTES_GENERATOR_SYSTEM = (
    "You generate high-quality release notes based on Git diffs, "
    "with Developer and Product/Business sections."
)

NOTES_GENERATOR_HUMAN = """
Given the following Git diff, create two sections:

1. Developer Notes:
-  Explain all tech changes
-  Mention critical details like bug fixes, any optimizations, or code refactors
-  Be to-the-point and concise
-  Highlight any key tech changes

2. Marketing Notes:
- Describe how the user experience changes from the fixes
- Use language that is easy to read (non-technical)
- Highlight any changes that would be directly visible to a user

---
Git Diff:
{diff}
"""
