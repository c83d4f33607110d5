"""LLM service module.

Turns prompts into accepted structured results despite free-form model output.

Key modules:
- llm.py: Gemini client returning flattened response text
- json_extractor.py: JSON recovery from noisy text
- structured_invoker.py: Bounded retry loop and validation hand-off
- validators.py / llm_schemas.py: Acceptance contract per result kind
- errors.py: Failure taxonomy
"""
