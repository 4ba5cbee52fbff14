"""
Default Name Tables.

Static data consulted by the identifier classifier and the closure generator:

1.  **DEFAULT_AMBIENT_NAMES**: Identifiers that exist in every worklet runtime
    (language built-ins and host functions injected by the UI runtime). These are
    never captured.
2.  **BLOCKED_PROPERTIES**: Well-known prototype members. A capture path stops
    before any of them, so `list.map` captures `list` rather than `list.map`.
3.  **INTERPOLATION_HELPERS**: Calls that do not clear the functionless bit.
4.  **STYLE_FACTORY_CALLEES**: Callees whose worklet arguments receive
    optimization flags.
"""

from typing import FrozenSet

WORKLET_DIRECTIVE = "worklet"

DEFAULT_AMBIENT_NAMES: FrozenSet[str] = frozenset(
  {
    "this",
    "console",
    "_setGlobalConsole",
    "Date",
    "Array",
    "ArrayBuffer",
    "Int8Array",
    "Int16Array",
    "Int32Array",
    "Uint8Array",
    "Uint8ClampedArray",
    "Uint16Array",
    "Uint32Array",
    "Float32Array",
    "Float64Array",
    "HermesInternal",
    "JSON",
    "Math",
    "Number",
    "Object",
    "String",
    "Symbol",
    "undefined",
    "null",
    "UIManager",
    "requestAnimationFrame",
    "_WORKLET",
    "arguments",
    "Boolean",
    "parseInt",
    "parseFloat",
    "Map",
    "Set",
    "_log",
    "_updateProps",
    "RegExp",
    "Error",
    "global",
    "_measure",
    "_scrollTo",
    "_setGestureState",
    "_getCurrentTime",
    "_eventTimestamp",
    "_frameTimestamp",
    "isNaN",
    "LayoutAnimationRepository",
    "_stopObservingProgress",
    "_startObservingProgress",
    "setTimeout",
    "globalThis",
    "workletUIModule",
  }
)

BLOCKED_PROPERTIES: FrozenSet[str] = frozenset(
  {
    "stopCapturing",
    "toString",
    "map",
    "filter",
    "forEach",
    "valueOf",
    "toPrecision",
    "toExponential",
    "constructor",
    "toFixed",
    "toLocaleString",
    "toSource",
    "charAt",
    "charCodeAt",
    "concat",
    "indexOf",
    "lastIndexOf",
    "localeCompare",
    "length",
    "match",
    "replace",
    "search",
    "slice",
    "split",
    "substr",
    "substring",
    "toLocaleLowerCase",
    "toLocaleUpperCase",
    "toLowerCase",
    "toUpperCase",
    "every",
    "join",
    "pop",
    "push",
    "reduce",
    "reduceRight",
    "reverse",
    "shift",
    "some",
    "sort",
    "splice",
    "unshift",
    "hasOwnProperty",
    "isPrototypeOf",
    "propertyIsEnumerable",
    "bind",
    "apply",
    "call",
    "__callAsync",
    "includes",
  }
)

INTERPOLATION_HELPERS: FrozenSet[str] = frozenset({"interpolate"})

STYLE_FACTORY_CALLEES: FrozenSet[str] = frozenset({"createAnimatedStyle"})

# Property holding the captured values on the runtime function object.
CLOSURE_FIELD = "_closure"
# Receiver through which the serialized function reads its captures.
CLOSURE_RECEIVER = "jsThis"
# Display name of an anonymous worklet in its serialized form.
ANONYMOUS_NAME = "_f"
