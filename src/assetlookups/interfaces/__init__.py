"""Interfaces (application boundary) for ASSETLOOKUPS.

Defines framework-free application contracts: ABCs and small read models
shared by the cache, the service layer and adapters (snapshot sources, write
backends). Business rules stay out of this package.

Dependency rule: this package is independent; do not import from any
`assetlookups.*` modules. It may be imported by `assetlookups.cache`,
`assetlookups.service_layer`, `assetlookups.adapters`, and
`assetlookups.bootstrap`.
"""
