from unilisp.expansion.expander import MacroExpander

__all__ = ["MacroExpander"]
