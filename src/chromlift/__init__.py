"""
Genomic coordinate liftover between reference assemblies

Converts (chromosome, start, end) intervals from one assembly to another
using a remote assembly-mapping service, and writes the original/mapped
correspondences as JSON or BED.
"""

__version__ = "1.0.0"
