"""
Tests for the Makefile patches — template/Makefile.in base pattern
selection, the MAINLIBS substitution, and cygwin/GNUmakefile.in tokens.
"""
import pytest

from patch_map.core import literals as L
from patch_map.core.builder import YJIT_LIBS_TOKEN, build_patch_map
from patch_map.core.linker_flags import MSYS_LIBRARIES, build_linker_flags
from patch_map.policy.profile import Profile

from patch_map.tests.conftest import DEPS_LIB_DIR, MSYS_OSTYPES, VERSIONS


def _mainlibs(edits):
    (key,) = [k for k in edits if k.startswith("MAINLIBS = ")]
    return key, edits[key]


class TestBasePatternSelection:

    def test_pre_31_pair(self):
        edits = build_patch_map("linux-gnu", DEPS_LIB_DIR, "3.0.9")["template/Makefile.in"]
        assert edits[L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN_PRE_3_1] == L.TEMPLATE_MAKEFILE_IN_BASE_PATCH_PRE_3_1
        assert L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN not in edits

    def test_post_31_pair(self):
        edits = build_patch_map("linux-gnu", DEPS_LIB_DIR, "3.1.0")["template/Makefile.in"]
        assert edits[L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN] == L.TEMPLATE_MAKEFILE_IN_BASE_PATCH
        assert L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN_PRE_3_1 not in edits

    @pytest.mark.parametrize("version", VERSIONS)
    def test_msys_pair_regardless_of_version(self, version):
        edits = build_patch_map("msys", DEPS_LIB_DIR, version)["template/Makefile.in"]
        assert edits[L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN] == L.TEMPLATE_MAKEFILE_IN_BASE_PATCH_MSYS
        assert L.TEMPLATE_MAKEFILE_IN_BASE_PATTERN_PRE_3_1 not in edits

    @pytest.mark.parametrize("version", VERSIONS)
    def test_exactly_two_edits(self, version):
        """One base pair plus the MAINLIBS substitution."""
        edits = build_patch_map("linux-musl", DEPS_LIB_DIR, version)["template/Makefile.in"]
        assert len(edits) == 2


class TestMainlibs:

    @pytest.mark.parametrize("ostype", ["linux-gnu", "linux-musl", "msys", "darwin22"])
    def test_yjit_token_for_32(self, ostype):
        key, value = _mainlibs(build_patch_map(ostype, DEPS_LIB_DIR, "3.2.0")["template/Makefile.in"])
        assert key == f"MAINLIBS = {YJIT_LIBS_TOKEN}@MAINLIBS@"
        assert f"MAINLIBS = {YJIT_LIBS_TOKEN}" in value

    @pytest.mark.parametrize("version", ["3.1.5", "3.3.0", "2.7.0"])
    def test_no_yjit_token_otherwise(self, version):
        key, value = _mainlibs(build_patch_map("linux-gnu", DEPS_LIB_DIR, version)["template/Makefile.in"])
        assert key == "MAINLIBS = @MAINLIBS@"
        assert "$(YJIT_LIBS)" not in value

    def test_value_wraps_linker_flags_in_markers(self):
        _, value = _mainlibs(build_patch_map("linux-gnu", DEPS_LIB_DIR, "3.1.0")["template/Makefile.in"])
        flags = build_linker_flags("linux-gnu", DEPS_LIB_DIR, "3.1.0")
        assert value == (
            L.MAINLIBS_START_MARKER + f"MAINLIBS = {flags}" + L.MAINLIBS_END_MARKER
        )

    def test_deps_lib_dir_forwarded(self):
        _, value = _mainlibs(build_patch_map("linux-gnu", "/custom/deps", "3.1.0")["template/Makefile.in"])
        assert "-L/custom/deps" in value


class TestGnumakefileIn:

    @pytest.mark.parametrize("ostype", MSYS_OSTYPES)
    def test_objext_token_by_version(self, ostype):
        new = build_patch_map(ostype, DEPS_LIB_DIR, "3.2.0")["cygwin/GNUmakefile.in"]
        old = build_patch_map(ostype, DEPS_LIB_DIR, "2.6.0")["cygwin/GNUmakefile.in"]
        assert "$(PROGRAM): $(RUBY_INSTALL_NAME).res.$(OBJEXT)" in new
        assert "$(PROGRAM): $(RUBY_INSTALL_NAME).res.@OBJEXT@" in old
        assert "$(WPROGRAM): $(RUBYW_INSTALL_NAME).res.$(OBJEXT)" in new
        assert "$(WPROGRAM): $(RUBYW_INSTALL_NAME).res.@OBJEXT@" in old
        assert not any("@OBJEXT@" in k for k in new)

    def test_fixed_rewrites(self):
        edits = build_patch_map("msys", DEPS_LIB_DIR, "3.1.0")["cygwin/GNUmakefile.in"]
        assert edits["RUBYDEF = $(DLL_BASE_NAME).def"] == L.GNUMAKEFILE_IN_WINMAIN_SUBST
        assert edits["$(RUBY_EXP): $(LIBRUBY_A)"].startswith("dummy.exp: $(LIBRUBY_A)")
        assert "$(MAINLIBS)" in edits["$(MAINOBJ) $(EXTOBJS) $(LIBRUBYARG) $(LIBS) -o $@"]


class TestCustomProfile:

    def test_mainlibs_follows_profile_family(self):
        profile = Profile(msys_markers=("mingw",))
        ps = build_patch_map("x86_64-w64-mingw32", DEPS_LIB_DIR, "3.2.0", profile)
        assert "cygwin/GNUmakefile.in" in ps
        _, value = _mainlibs(ps["template/Makefile.in"])
        for lib in MSYS_LIBRARIES:
            assert lib in value
        assert "-lpthread" not in value
