"""Command interpretation and reply composition.

The intent layer converts an English utterance into a strict `ParsedCommand` (intent plus entity
record) and composes the confirmation text shown back to the user.
"""
