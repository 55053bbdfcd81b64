# keywords: [worlds, challenge environments]
"""Grid worlds the interpreter drives actors through."""
