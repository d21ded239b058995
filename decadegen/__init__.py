"""decadegen: image-to-image decade restyling over a Gemini image model.

Package layout:
    - `image`: data URL codec, retry policy, model invoker, generation service.
    - `api`: HTTP adapter, HTTP client requester, and CLI entrypoints.
    - `prompting`: per-decade prompt templates.
"""

__version__ = "0.1.0"
