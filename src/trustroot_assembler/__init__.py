"""
trustroot_assembler — TrustRoot descriptor assembly from a Sigstore trusted root.

Reads trusted_root.json, re-encodes each certificate and timestamp
authority chain as base64 PEM, and writes the results into a TrustRoot
YAML template.

Built on the Railway-Oriented Programming (ROP) framework for
explicit, composable error handling.
"""

__version__ = "0.1.0"
