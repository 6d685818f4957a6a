# tests/test_package.py
"""
Tests for the package namespace and metadata helpers.
"""

import arrayblock


class TestPackage:

    def test_reexports(self):
        """Public names are available at package level."""
        from arrayblock.array_blk import ArrayBlk
        assert arrayblock.ArrayBlk is ArrayBlk
        assert arrayblock.itv.Itv is arrayblock.Itv
        assert "ArrayBlk" in arrayblock.__all__
        assert "UNKNOWN_SITE" in arrayblock.__all__

    def test_list_submodules(self):
        assert arrayblock.list_submodules() == sorted([
            "array_blk", "boolean", "bounds", "config",
            "errors", "itv", "locations", "map_domain",
        ])

    def test_domain_info(self):
        info = arrayblock.domain_info()
        assert info["package"] == "arrayblock"
        assert info["version"] == arrayblock.__version__
        assert info["loaded_submodules"] == arrayblock.list_submodules()
        assert info["config"]["widening_thresholds"] == [0]

    def test_quick_start(self):
        """The quick-start example from the package docstring works."""
        buf = arrayblock.AllocSite.known("buf")
        blk = arrayblock.ArrayBlk.make_native(
            buf, arrayblock.Itv.zero(), arrayblock.Itv.of_range(2, 4), arrayblock.Itv.of_int(8)
        )
        assert str(blk.sizeof_byte()) == "[16, 32]"
