"""
:py:mod:`jsonapi_graph.serde` deals with the wire side: the representation of a JSON:API
response document and its deserialization from a parsed JSON object.
"""
