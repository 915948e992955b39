"""ASSETLOOKUPS test suite.

Folder taxonomy
- unit/         : One module/class/function; temp files at most.
- contract/     : The same behaviour run against every lookup store.
- integration/  : Migrated SQLite databases, bootstrap wiring.
- e2e/          : The ``assetlookups`` CLI through click's CliRunner.
- fixtures/     : Shared fixtures, registered via ``pytest_plugins``.
- helpers/      : Fake snapshot sources (no tests here).

General guidance
- Coroutines are driven with ``asyncio.run`` inside plain tests.
- Prefer scripted fakes over mocks at the snapshot-source boundary.
- Property-based tests live with the layer they exercise and use @pytest.mark.property.
- Markers: unit, contract, integration, e2e, property
"""
