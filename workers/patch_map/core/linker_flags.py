"""
Linker flags — the MAINLIBS value spliced into template/Makefile.in.

The flags link the packager filesystem libraries as whole archives, then
the compression/archive stack, then the OS system libraries, all from
static archives under the dependency library directory.

Library sets follow the resolved OS family.  Inside the generic Unix
family, darwin and glibc Linux get their own sets.
"""
from __future__ import annotations

import logging
from enum import Enum, unique
from typing import List, Optional

from patch_map.core.os_family import OSFamily, resolve_os_family
from patch_map.core.version import VersionLike, is_version_32_or_above

logger = logging.getLogger(__name__)


@unique
class LinkTarget(str, Enum):
    DARWIN = "darwin"
    LINUX_GNU = "linux-gnu"
    LINUX_MUSL = "linux-musl"
    MSYS = "msys"
    GENERIC = "generic"


PACKAGER_FS_LIBRARY = "-l:libstaticpack-fs.a"

DWARFS_LIBRARIES = [
    "-l:libdwarfs-wr.a", "-l:libdwarfs.a",
    "-l:libfolly.a", "-l:libfsst.a", "-l:libmetadata_thrift.a",
    "-l:libthrift_light.a", "-l:libxxhash.a", "-l:libfmt.a",
    "-l:libdouble-conversion.a", "-l:libglog.a", "-l:libgflags.a",
    "-l:libevent.a",
]

ARCHIVE_LIBRARIES = [
    "-l:libarchive.a", "-l:liblz4.a", "-l:libz.a", "-l:libzstd.a",
    "-l:libbrotlienc.a", "-l:libbrotlidec.a", "-l:libbrotlicommon.a",
    "-l:liblzma.a",
]

LINUX_GNU_LIBRARIES = [
    "-l:libiberty.a", "-l:libacl.a", "-l:libssl.a", "-l:libcrypto.a",
    "-l:libgdbm.a", "-l:libreadline.a", "-l:libtinfo.a", "-l:libffi.a",
    "-l:libncurses.a", "-l:libjemalloc.a", "-l:libcrypt.a", "-l:libanl.a",
    "-l:libc++.a", "-l:libc++abi.a", "-l:libunwind.a",
    "-lpthread", "-lrt", "-ldl", "-lm",
]

LINUX_MUSL_LIBRARIES = [
    "-l:libiberty.a", "-l:libacl.a", "-l:libssl.a", "-l:libcrypto.a",
    "-l:libgdbm.a", "-l:libreadline.a", "-l:libffi.a", "-l:libncurses.a",
    "-l:libjemalloc.a", "-l:libcrypt.a", "-l:librt.a", "-l:libstdc++.a",
    "-static-libgcc", "-static-libstdc++", "-lpthread", "-lm",
]

DARWIN_LIBRARIES = [
    "-lgdbm", "-lreadline", "-lffi", "-lncurses", "-lssl", "-lcrypto",
    "-ljemalloc", "-lc++", "-lc++abi",
]

MSYS_LIBRARIES = [
    "-l:libssl.a", "-l:libcrypto.a", "-l:libffi.a", "-l:libgdbm.a",
    "-l:libncurses.a", "-l:libjemalloc.a", "-l:libunwind.a",
    "-lole32", "-loleaut32", "-luuid", "-lws2_32", "-liphlpapi",
    "-ldbghelp", "-lshlwapi", "-lstdc++",
]

GENERIC_LIBRARIES = [
    "-l:libssl.a", "-l:libcrypto.a", "-l:libffi.a", "-l:libncurses.a",
    "-lpthread", "-lm",
]

_SYSTEM_LIBRARIES = {
    LinkTarget.DARWIN: DARWIN_LIBRARIES,
    LinkTarget.LINUX_GNU: LINUX_GNU_LIBRARIES,
    LinkTarget.LINUX_MUSL: LINUX_MUSL_LIBRARIES,
    LinkTarget.MSYS: MSYS_LIBRARIES,
    LinkTarget.GENERIC: GENERIC_LIBRARIES,
}


def classify_link_target(family: OSFamily, ostype: str = "") -> LinkTarget:
    """
    Map a resolved OS family to its library set.

    Only the generic Unix family is refined further, by whether the
    identifier names darwin or a glibc Linux.
    """
    if family == OSFamily.LINUX_MUSL:
        return LinkTarget.LINUX_MUSL
    if family == OSFamily.MSYS_WINDOWS:
        return LinkTarget.MSYS
    ostype = ostype or ""
    if "darwin" in ostype:
        return LinkTarget.DARWIN
    if "linux" in ostype:
        return LinkTarget.LINUX_GNU
    return LinkTarget.GENERIC


def _whole_archive(target: LinkTarget, libs: List[str]) -> List[str]:
    # ld64 has no --whole-archive
    if target == LinkTarget.DARWIN:
        return ["-Wl,-all_load"] + libs + ["-Wl,-noall_load"]
    return ["-Wl,--whole-archive"] + libs + ["-Wl,--no-whole-archive"]


def build_linker_flags(
    ostype: str,
    deps_lib_dir: str,
    version: VersionLike,
    family: Optional[OSFamily] = None,
) -> str:
    """
    Build the MAINLIBS flags for *ostype*.

    *deps_lib_dir* is forwarded verbatim as the ``-L`` search path.  The
    result always ends with a newline.  Unknown identifiers get the
    generic Unix library set rather than an error.

    *family* is the already resolved OS family; when omitted it is
    resolved from *ostype* with the default profile.
    """
    if family is None:
        family = resolve_os_family(ostype)
    target = classify_link_target(family, ostype)
    if target == LinkTarget.GENERIC:
        logger.debug("No dedicated library set for %r, using generic Unix libraries", ostype)

    flags: List[str] = [f"-L{deps_lib_dir}"]
    flags.extend(_whole_archive(target, [PACKAGER_FS_LIBRARY]))
    flags.extend(DWARFS_LIBRARIES)
    flags.extend(ARCHIVE_LIBRARIES)

    # psych stopped bundling libyaml sources in 3.2
    if is_version_32_or_above(version):
        flags.append("-l:libyaml.a")

    flags.extend(_SYSTEM_LIBRARIES[target])
    return " ".join(flags) + "\n"
