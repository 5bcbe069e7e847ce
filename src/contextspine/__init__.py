"""
contextspine - Declarative page context resolution.

A context template is a nested mapping that describes the content a page
needs. ``contextspine`` resolves every query directive in it concurrently,
runs the results through named transforms and splices them back in place.

- contextspine.core: errors, logging, settings, timestamps and date helpers
- contextspine.framework: parser, dispatcher, transforms, resolver
- contextspine.cli: command-line entry point
"""

__version__ = "0.1.0"
