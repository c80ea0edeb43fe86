"""
Device registry: bindings from a tag's `code`/`deviceId` to the pet it tracks.
"""
