"""Image generation package.

Scope:
    Provides the data URL codec, the model capability interface, the retry
    policy, and the generation service that ties them together.

Non-goals:
    - No persistence of generated images.
    - No image editing or pixel-level processing.
"""
