"""
xcbridge - Session-aware tool server for Xcode build and simulator automation.

xcbridge exposes command-line build/test tools to automated agents. Agents
set context once (project, scheme, simulator, ...) and every later call
reuses it:
- Session defaults shared by all calls in the process
- Declarative per-tool requirements (allOf / oneOf / exclusive pairs)
- One well-formed response per call, errors included

Example usage:
    $ xcbridge serve --defaults session.yaml
    $ xcbridge call boot_sim --args '{"simulatorId": "..."}'
"""

__version__ = "0.1.0"
__author__ = "xcbridge Contributors"

__all__ = [
    "__version__",
    "__author__",
]
