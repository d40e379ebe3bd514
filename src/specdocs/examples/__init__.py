"""Example value synthesis for request and response payloads.

Sub-modules:

* :mod:`~specdocs.examples.synthesizer` -- schema-driven example values.
* :mod:`~specdocs.examples.errors` -- contextual error bodies for 4xx/5xx
  responses, chosen by resource path and verb.
"""

from specdocs.examples.errors import contextual_error_example, is_error_status
from specdocs.examples.synthesizer import ExampleSynthesizer, synthesize

__all__ = [
    "ExampleSynthesizer",
    "synthesize",
    "contextual_error_example",
    "is_error_status",
]
