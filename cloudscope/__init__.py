"""CloudScope: cloud resource enumeration, normalization and graph views.

Given a stored cloud credential, CloudScope asks an external backend to
enumerate the credential's resources, normalizes the payloads into
canonical Resource records, and derives topology and privilege-escalation
graphs from them.
"""

__version__ = "0.1.0"
