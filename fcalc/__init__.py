"""fcalc: an interactive evaluator for a small untyped, curried functional expression language.

Basic program flow:
    1. Lexer: splits a line into tokens (fcalc/pure/lexical.py)
    2. Parser: builds a syntax tree and tags every identifier as global or local (fcalc/pure/parser.py)
    3. Reducer: rewrites the tree to normal form by substitution, reading and writing the session's global bindings
       (fcalc/pure/reducer.py, fcalc/lang/numerical.py)
    4. Session/Shell: run statements from files or the command line and print their results (fcalc/lang/)
"""

from fcalc.lang.session import Session
