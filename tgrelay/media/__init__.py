"""
Media handling for the relay.

- routing: MIME type -> Bot API send endpoint
- extract: Bot API reply -> UploadedFile
- models: rows and values passed between handlers and the store
"""
