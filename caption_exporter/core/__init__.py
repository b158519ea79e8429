"""Core extraction, parsing and orchestration modules.

WHY: The core package holds the validation rules and ordering guarantees
of the pipeline. It depends on the raw api models but never on HTTP.

HOW: ir.py defines the data structures, extractor.py builds the manifest,
parser.py builds tracks, captions.py wires them to a transport and the
SRT formatter, video_id.py normalises user input.

RULES:
- IR dataclasses are the contract — change with care
- Skip-vs-abort policy lives only in extractor.py and parser.py
"""
