"""ffstage: staged ffmpeg/ffprobe orchestration for write-restricted hosts.

Copies the bundled media tools into an executable temp location, builds
injection-safe ffmpeg argument vectors and interprets ffmpeg diagnostics.
"""

from ffstage.version import __version__

__all__: list[str] = ["__version__"]
