"""Accessible Learning Platform: course backend and caption tooling.

WHY: Hearing-impaired and visually-impaired students need course videos
with reliable captions, and teachers need a small backend to publish
courses, collect homework and see which students are stuck. This package
provides both: a JSON-file REST backend and a caption pipeline that turns
word-level transcription output into timed subtitle cues.

HOW: Four layers: storage (JSON documents), captions (pure cue synthesis
and rendering), api (AssemblyAI transcription client) and server (FastAPI
routes wiring the other three together). Each layer is independently
testable.

RULES:
- The captions core never performs I/O
- All output formats consume the same Word list
- Clients and stores are injected into the app, never module singletons
"""

__version__ = "0.1.0"
