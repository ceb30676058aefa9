#!/usr/bin/env python3
"""
Album Rater CLI - search albums, rate tracks and browse your rated collection.

Tracks are scored on beat, lyrics, flow, content and replay value; album scores
are computed on demand from every rated track that is not a skit or interlude.
"""

from album_rater.interface.cli import app

if __name__ == "__main__":
    app()
