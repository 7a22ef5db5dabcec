"""
safety-spine - scheduled safety inspection reporting.

Submissions from the forms intake are aggregated on a recurring cadence,
rendered to PDF and XLSX attachments and delivered by email.

Subpackages:
- safety_spine.core: errors, logging, settings, persistence primitives
- safety_spine.submissions: submission records and the submission store
- safety_spine.reporting: statistics, report windows and renderers
- safety_spine.delivery: MIME assembly, transports and the override policy
- safety_spine.scheduling: schedule registry, triggers and the report pipeline
- safety_spine.ops / api / cli: operation layer and its HTTP and CLI surfaces
"""

__version__ = "0.1.0"
