from unilisp.native.resolver import NativeResolver, find_function, split_function_name
from unilisp.native.marshal import to_native, from_native

__all__ = ["NativeResolver", "find_function", "split_function_name", "to_native", "from_native"]
