"""Core operation package.

Composition:
    - `types`: image payload, operation requests and result contracts.
    - `errors`: validation / empty-response / remote failure taxonomy.
    - `engine`: the public `remove_background`, `upscale` and `compress`
      operations.

Package import is side-effect free.
"""
