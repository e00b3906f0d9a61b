"""
Literals — named patch bodies applied to the Ruby source tree.

Every value here is immutable: plain strings, or EditSets wrapped in
``MappingProxyType``.  Builders copy EditSets into fresh dicts before
merging, so nothing in this module changes after import.
"""
from types import MappingProxyType

# ── Shared C include shims ───────────────────────────────────────────────────

# Full shim: filesystem redirection plus the dlopen/dlsym substitutions.
C_FILE_SUBST = (
    "/* -- Start of staticpack patch -- */\n"
    "#include <staticpack/staticpack-config.h>\n"
    "#include <staticpack/staticpack-defines.h>\n"
    "#include <staticpack/staticpack-io-rb-w32.h>\n"
    "#include <staticpack/staticpack-io.h>\n"
    "/* -- End of staticpack patch -- */"
)

# Windows does not load extensions through dlopen, so no dl* substitutions.
C_FILE_SUBST_LESS = (
    "/* -- Start of staticpack patch -- */\n"
    "#include <staticpack/staticpack-config.h>\n"
    "#include <staticpack/staticpack-io-rb-w32.h>\n"
    "/* -- End of staticpack patch -- */"
)

# ── template/Makefile.in ─────────────────────────────────────────────────────

# The link rule was rewritten upstream in 3.1 (LDFLAGS -> EXE_LDFLAGS, $(LIBS) dropped).
TEMPLATE_MAKEFILE_IN_BASE_PATTERN_PRE_3_1 = (
    "\t\t$(Q) $(PURIFY) $(CC) $(LDFLAGS) $(XLDFLAGS) $(MAINOBJ) "
    "$(EXTOBJS) $(LIBRUBYARG) $(MAINLIBS) $(LIBS) $(EXTLIBS) $(OUTFLAG)$@"
)

TEMPLATE_MAKEFILE_IN_BASE_PATCH_PRE_3_1 = (
    "# -- Start of staticpack patch -- \n"
    "\t\t$(Q) $(PURIFY) $(CC) $(LDFLAGS) $(XLDFLAGS) $(MAINOBJ) "
    "$(EXTOBJS) $(LIBRUBYARG_STATIC) $(LIBS) $(MAINLIBS) $(EXTLIBS) $(OUTFLAG)$@\n"
    "# -- End of staticpack patch -- "
)

TEMPLATE_MAKEFILE_IN_BASE_PATTERN = (
    "\t\t$(Q) $(PURIFY) $(CC) $(EXE_LDFLAGS) $(XLDFLAGS) $(MAINOBJ) "
    "$(EXTOBJS) $(LIBRUBYARG) $(MAINLIBS) $(EXTLIBS) $(OUTFLAG)$@"
)

TEMPLATE_MAKEFILE_IN_BASE_PATCH = (
    "# -- Start of staticpack patch -- \n"
    "\t\t$(Q) $(PURIFY) $(CC) $(EXE_LDFLAGS) $(XLDFLAGS) $(MAINOBJ) "
    "$(EXTOBJS) $(LIBRUBYARG_STATIC) $(MAINLIBS) $(EXTLIBS) $(OUTFLAG)$@\n"
    "# -- End of staticpack patch -- "
)

TEMPLATE_MAKEFILE_IN_BASE_PATCH_MSYS = (
    "# -- Start of staticpack patch -- \n"
    "\t\t$(Q) $(PURIFY) $(CC) $(EXE_LDFLAGS) $(XLDFLAGS) $(MAINOBJ) "
    "$(EXTOBJS) $(LIBRUBYARG_STATIC) $(MAINLIBS) $(EXTLIBS) -static $(OUTFLAG)$@\n"
    "# -- End of staticpack patch -- "
)

MAINLIBS_START_MARKER = "# -- Start of staticpack patch -- \n"
MAINLIBS_END_MARKER = "# -- End of staticpack patch -- \n"

# ── cygwin/GNUmakefile.in ────────────────────────────────────────────────────

GNUMAKEFILE_IN_WINMAIN_SUBST = (
    "RUBYDEF = $(DLL_BASE_NAME).def\n\n"
    "# -- Start of staticpack patch -- \n"
    "WINMAINOBJ = win32/winmain.$(OBJEXT)\n"
    "$(WINMAINOBJ): win32/winmain.c\n"
    "# -- End of staticpack patch -- \n"
)

# ── Constant EditSets ────────────────────────────────────────────────────────

TOOL_MKCONFIG_RB_PATCH = MappingProxyType({
    "    if fast[name]": (
        "    # -- Start of staticpack patch -- \n"
        "    v_head_comp = \"  CONFIG[\\\"prefix\\\"] #{'  ' * (v_fast.size - 1)}= \"\n"
        "    if v_head_comp == \"#{name} #{val}\"\n"
        "      v_fast << v_head_comp + \"'/__staticpack_memfs__'\\n\"\n"
        "      next\n"
        "    end\n"
        "    # -- End of staticpack patch -- \n"
        "    if fast[name]"
    ),
})

TOOL_MKCONFIG_RB_PATCH_MSYS = MappingProxyType({
    "    if fast[name]": (
        "    # -- Start of staticpack patch -- \n"
        "    v_head_comp = \"  CONFIG[\\\"prefix\\\"] #{'  ' * (v_fast.size - 1)}= \"\n"
        "    if v_head_comp == \"#{name} #{val}\"\n"
        "      v_fast << v_head_comp + \"'A:/__staticpack_memfs__'\\n\"\n"
        "      next\n"
        "    end\n"
        "    # -- End of staticpack patch -- \n"
        "    if fast[name]"
    ),
})

GEM_PRELUDE_RB_PATCH = MappingProxyType({
    "if defined?(DidYouMean)": (
        "# -- Start of staticpack patch -- \n"
        "require 'staticpack-runtime'\n"
        "# -- End of staticpack patch -- \n"
        "if defined?(DidYouMean)"
    ),
})

MAIN_C_PATCH = MappingProxyType({
    "int\nmain(int argc, char **argv)": (
        "/* -- Start of staticpack patch -- */\n"
        "#include <staticpack/staticpack-main.h>\n"
        "/* -- End of staticpack patch -- */\n\n"
        "int\nmain(int argc, char **argv)"
    ),
    "    ruby_sysinit(&argc, &argv);": (
        "    ruby_sysinit(&argc, &argv);\n"
        "/* -- Start of staticpack patch -- */\n"
        "    if (staticpack_main(&argc, &argv) != 0) {\n"
        "        return -1;\n"
        "    }\n"
        "/* -- End of staticpack patch -- */"
    ),
})

DIR_C_BASE_PATCH = MappingProxyType({
    "#if defined HAVE_GETATTRLIST && defined ATTR_DIR_ENTRYCOUNT": (
        "#if defined HAVE_GETATTRLIST && defined ATTR_DIR_ENTRYCOUNT && "
        "!defined(STATICPACK_NO_GETATTRLIST) /* staticpack patched */"
    ),
    "static DIR *\nopendir_without_gvl(const char *path)\n{": (
        "static DIR *\nopendir_without_gvl(const char *path)\n{\n"
        "/* -- Start of staticpack patch -- */\n"
        "    if (within_staticpack_memfs(path)) return staticpack_opendir(path);\n"
        "/* -- End of staticpack patch -- */"
    ),
})

IO_C_MSYS_PATCH = MappingProxyType({
    "#define open rb_w32_uopen": "#define open(p, f, m) staticpack_open(3, (p), (f), (m)) /* staticpack patched */",
})

DLN_C_MSYS_PATCH = MappingProxyType({
    "    winfile = rb_w32_mbstr_to_wstr(CP_UTF8, file, -1, NULL);": (
        "/* -- Start of staticpack patch -- */\n"
        "    char *dll_path = staticpack_dlmap2file(file);\n"
        "    winfile = rb_w32_mbstr_to_wstr(CP_UTF8, dll_path ? dll_path : file, -1, NULL);\n"
        "/* -- End of staticpack patch -- */"
    ),
})

RUBY_C_MSYS_PATCHES = MappingProxyType({
    "#ifndef MAXPATHLEN": f"{C_FILE_SUBST_LESS}\n#ifndef MAXPATHLEN",
})

WIN32_FILE_C_MSYS_PATCHES = MappingProxyType({
    "#ifndef INVALID_FILE_ATTRIBUTES": f"{C_FILE_SUBST_LESS}\n#ifndef INVALID_FILE_ATTRIBUTES",
    "if (!(h = CreateFileW(wpath, 0, FILE_SHARE_READ | FILE_SHARE_WRITE | FILE_SHARE_DELETE, NULL,": (
        "/* -- Start of staticpack patch -- */\n"
        "    if (within_staticpack_memfs_w(wpath)) return Qnil;\n"
        "/* -- End of staticpack patch -- */\n"
        "if (!(h = CreateFileW(wpath, 0, FILE_SHARE_READ | FILE_SHARE_WRITE | FILE_SHARE_DELETE, NULL,"
    ),
})

LINUX_MUSL_THREAD_PTHREAD_PATCH = MappingProxyType({
    "#if MAINSTACKADDR_AVAILABLE && defined(get_main_thread_stack)": (
        "#if MAINSTACKADDR_AVAILABLE && defined(get_main_thread_stack) && "
        "!defined(__MUSL__) /* staticpack patched */"
    ),
})

COMMON_MK_PATCH = MappingProxyType({
    "ext/extinit.c: $(srcdir)/template/extinit.c.tmpl $(PREP)": (
        "ext/extinit.c: $(srcdir)/template/extinit.c.tmpl $(PREP) $(EXTS_MK) # staticpack patched"
    ),
})
