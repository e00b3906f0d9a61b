"""
Builder — assemble the patch map for one target (OS identifier, deps dir,
runtime version).

Steps:
  1. Resolve the OS identifier to one ``OSFamily``.
  2. Build the nine-file base PatchSet, one sub-builder per file.
  3. Fold the conditional overlays over it with ``merge_overlay``:
       - linux-musl   → thread_pthread.c
       - msys-windows → cygwin/GNUmakefile.in, ruby.c, win32/file.c
       - otherwise, 3.x → common.mk
     The MSYS and common.mk overlays are mutually exclusive.

Every call builds fresh dicts; the literal constants are only read.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from patch_map.core import literals as L
from patch_map.core.linker_flags import build_linker_flags
from patch_map.core.os_family import OSFamily, resolve_os_family
from patch_map.core.overlay import EditSet, NamedOverlay, PatchSet, edit_set, merge_overlays
from patch_map.core.version import (
    RuntimeVersion,
    VersionLike,
    coerce_version,
    is_version_3x,
    is_version_31_or_above,
    is_version_32_exact,
    is_version_32_or_above,
)
from patch_map.policy.profile import Profile

logger = logging.getLogger(__name__)

# Anchors shared by several C files.
SYSTEM_APIS_ANCHOR = "/* define system APIs */"
DIR_C_ANCHOR = "#ifdef HAVE_GETATTRLIST"
UTIL_C_ANCHOR = "#ifndef S_ISDIR"
DLN_C_ANCHOR = "static const char funcname_prefix[sizeof(FUNCNAME_PREFIX) - 1] = FUNCNAME_PREFIX;"

YJIT_LIBS_TOKEN = "$(YJIT_LIBS) "

BASE_FILES = (
    "template/Makefile.in",
    "tool/mkconfig.rb",
    "gem_prelude.rb",
    "dir.c",
    "dln.c",
    "io.c",
    "file.c",
    "main.c",
    "util.c",
)

MSYS_FILES = ("cygwin/GNUmakefile.in", "ruby.c", "win32/file.c")


# ── Entry point ──────────────────────────────────────────────────────────────

def build_patch_map(
    ostype: str,
    deps_lib_dir: str,
    runtime_version: VersionLike,
    profile: Optional[Profile] = None,
) -> PatchSet:
    """
    Build the complete file → EditSet map for one target.

    Parameters
    ----------
    ostype : str
        Free-form OS identifier (``"linux-gnu"``, ``"linux-musl"``,
        ``"msys"``, ``"darwin22"`` ...).  Unknown values are generic Unix.
    deps_lib_dir : str
        Dependency library directory, forwarded verbatim to the linker
        flags builder.
    runtime_version : RuntimeVersion or str
        Target Ruby version.  An unparseable string raises
        ``ConfigurationError``.
    profile : Profile, optional
        OS family markers.  Defaults to ``Profile.v0()``.
    """
    family = resolve_os_family(ostype, profile)
    version = coerce_version(runtime_version)

    base = build_base_patch_map(family, ostype, deps_lib_dir, version)
    overlays = select_overlays(family, version)
    patch_map = merge_overlays(base, overlays)

    logger.debug(
        "Patch map for %s (%s) ruby %s: %d files, overlays=%s",
        ostype, family.value, version, len(patch_map), [name for name, _ in overlays],
    )
    return patch_map


def build_base_patch_map(
    family: OSFamily,
    ostype: str,
    deps_lib_dir: str,
    version: RuntimeVersion,
) -> PatchSet:
    """The nine base files, before any overlay."""
    return {
        "template/Makefile.in": template_makefile_in_patch(family, ostype, deps_lib_dir, version),
        "tool/mkconfig.rb": edit_set(
            L.TOOL_MKCONFIG_RB_PATCH_MSYS if family == OSFamily.MSYS_WINDOWS else L.TOOL_MKCONFIG_RB_PATCH
        ),
        "gem_prelude.rb": edit_set(L.GEM_PRELUDE_RB_PATCH),
        "dir.c": dir_c_patch(family),
        "dln.c": dln_c_patch(family),
        "io.c": io_c_patch(family),
        "file.c": patch_c_file(SYSTEM_APIS_ANCHOR),
        "main.c": edit_set(L.MAIN_C_PATCH),
        "util.c": patch_c_file(UTIL_C_ANCHOR),
    }


# ── Overlays ─────────────────────────────────────────────────────────────────

def select_overlays(family: OSFamily, version: RuntimeVersion) -> List[NamedOverlay]:
    """
    Conditional overlays in application order.  Fragments that do not
    apply to this target are left out.
    """
    candidates: List[NamedOverlay] = [
        ("linux-musl", musl_overlay(family)),
        ("msys", msys_overlay(family, version)),
        ("common-mk", common_mk_overlay(family, version)),
    ]
    return [(name, fragment) for name, fragment in candidates if fragment]


def musl_overlay(family: OSFamily) -> PatchSet:
    if family != OSFamily.LINUX_MUSL:
        return {}
    return {"thread_pthread.c": edit_set(L.LINUX_MUSL_THREAD_PTHREAD_PATCH)}


def msys_overlay(family: OSFamily, version: RuntimeVersion) -> PatchSet:
    if family != OSFamily.MSYS_WINDOWS:
        return {}
    return {
        "cygwin/GNUmakefile.in": gnumakefile_in_patch(version),
        "ruby.c": edit_set(L.RUBY_C_MSYS_PATCHES),
        "win32/file.c": edit_set(L.WIN32_FILE_C_MSYS_PATCHES),
    }


def common_mk_overlay(family: OSFamily, version: RuntimeVersion) -> PatchSet:
    # TODO: confirm whether common.mk needs this on targets other than Windows
    if family == OSFamily.MSYS_WINDOWS or not is_version_3x(version):
        return {}
    return {"common.mk": edit_set(L.COMMON_MK_PATCH)}


# ── Per-file sub-builders ────────────────────────────────────────────────────

def patch_c_file(anchor: str) -> EditSet:
    """Insert the include shim immediately before *anchor*, keeping the anchor."""
    return {anchor: f"{L.C_FILE_SUBST}\n{anchor}"}


def dir_c_patch(family: OSFamily) -> EditSet:
    anchor = SYSTEM_APIS_ANCHOR if family == OSFamily.MSYS_WINDOWS else DIR_C_ANCHOR
    return edit_set(patch_c_file(anchor), L.DIR_C_BASE_PATCH)


def dln_c_patch(family: OSFamily) -> EditSet:
    # No dlopen substitutions on Windows, so the smaller shim
    subst = L.C_FILE_SUBST_LESS if family == OSFamily.MSYS_WINDOWS else L.C_FILE_SUBST
    patch = {DLN_C_ANCHOR: f"{subst}\n{DLN_C_ANCHOR}\n"}
    if family == OSFamily.MSYS_WINDOWS:
        patch.update(L.DLN_C_MSYS_PATCH)
    return patch


def io_c_patch(family: OSFamily) -> EditSet:
    patch = patch_c_file(SYSTEM_APIS_ANCHOR)
    if family == OSFamily.MSYS_WINDOWS:
        patch.update(L.IO_C_MSYS_PATCH)
    return patch


def template_makefile_in_patch(
    family: OSFamily,
    ostype: str,
    deps_lib_dir: str,
    version: RuntimeVersion,
) -> EditSet:
    return edit_set(
        template_makefile_in_base_patch(family, version),
        mainlibs_patch(family, ostype, deps_lib_dir, version),
    )


def template_makefile_in_base_patch(family: OSFamily, version: RuntimeVersion) -> EditSet:
    """Exactly one (pattern, patch) pair: MSYS, then ≥3.1, then pre-3.1."""
    if family == OSFamily.MSYS_WINDOWS:
        return {L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN: L.TEMPLATE_MAKEFILE_IN_BASE_PATCH_MSYS}
    if is_version_31_or_above(version):
        return {L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN: L.TEMPLATE_MAKEFILE_IN_BASE_PATCH}
    return {L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN_PRE_3_1: L.TEMPLATE_MAKEFILE_IN_BASE_PATCH_PRE_3_1}


def mainlibs_patch(
    family: OSFamily,
    ostype: str,
    deps_lib_dir: str,
    version: RuntimeVersion,
) -> EditSet:
    """Replace ``MAINLIBS = ...@MAINLIBS@`` with the static link flags."""
    yjit_libs = YJIT_LIBS_TOKEN if is_version_32_exact(version) else ""
    return {
        f"MAINLIBS = {yjit_libs}@MAINLIBS@": (
            L.MAINLIBS_START_MARKER
            + f"MAINLIBS = {yjit_libs}{build_linker_flags(ostype, deps_lib_dir, version, family)}"
            + L.MAINLIBS_END_MARKER
        )
    }


def gnumakefile_in_patch(version: RuntimeVersion) -> EditSet:
    """Link-rule rewrites for cygwin/GNUmakefile.in; ruby.exp regeneration is disabled."""
    objext = "$(OBJEXT)" if is_version_32_or_above(version) else "@OBJEXT@"
    return {
        f"$(WPROGRAM): $(RUBYW_INSTALL_NAME).res.{objext}": (
            f"$(WPROGRAM): $(RUBYW_INSTALL_NAME).res.{objext} $(WINMAINOBJ)  # staticpack patched"
        ),
        "$(MAINOBJ) $(EXTOBJS) $(LIBRUBYARG) $(LIBS) -o $@": (
            "$(WINMAINOBJ) $(EXTOBJS) $(LIBRUBYARG) $(MAINLIBS) -o $@  # staticpack patched"
        ),
        "RUBYDEF = $(DLL_BASE_NAME).def": L.GNUMAKEFILE_IN_WINMAIN_SUBST,
        "$(RUBY_EXP): $(LIBRUBY_A)": "dummy.exp: $(LIBRUBY_A) # staticpack patched",
        f"$(PROGRAM): $(RUBY_INSTALL_NAME).res.{objext}": (
            f"$(PROGRAM): $(RUBY_INSTALL_NAME).res.{objext} $(LIBRUBY_A) # staticpack patched\n"
            "$(LIBRUBY_A): $(LIBRUBY_A_OBJS) $(INITOBJS) # staticpack patched\n"
        ),
    }
