"""RFC 5322 grammar: combinators, lexical tokens, structured fields and the message framer."""
