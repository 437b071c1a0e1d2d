"""fips generator for ``sokol_shader``/``sokol_shader_variant``.

Loaded by fips by file name; the work is done by :mod:`shdcbuild.fips`.
"""

from shdcbuild import fips

Version = fips.Version


def generate(input, out_src, out_hdr, args):
    return fips.generate(input, out_src, out_hdr, args)
