"""
The MODEL layer contains pure data structures and business logic.
It has NO knowledge of the GUI (Qt widgets) or of rendering.
It deals with the catalogue tree, navigation, the edit overlay and I/O.
"""
