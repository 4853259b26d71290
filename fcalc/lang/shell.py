"""Handles interactive/command-line mode for the fcalc interpreter. Uses cmd as backend."""

import cmd
import re

from fcalc.lang.session import Session


class Shell(cmd.Cmd):
    """fcalc interpreter shell. Lines that are not commands are evaluated and their normal form is printed."""
    intro = "fcalc :: curried functional calculator\nType 'help' for more information."
    prompt = "=> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "=> "      # also used for prompt swapping in line continuations

    NAME = re.compile(r"[a-zA-Z_]\w*$")

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.sess.error_handler.register_file(Session.SH_FILE)

        self._tmp_line = ""
        self.line_num = 0

    def default(self, line):
        """Executes arbitrary fcalc statement."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.line_num += 1
            line, add_to_prev = self.sess.preprocess_line(f"{self._tmp_line} {line}" if self._tmp_line else line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt
            if not line.strip():
                return

            self.sess.error_handler.register_line(Session.SH_FILE, line, self.line_num)
            self.sess.run(line)
            self.sess.error_handler.remove_line(Session.SH_FILE)

            if self.sess.results:
                print(self.sess.pop())

    def onecmd(self, line):
        """Continuation lines are always statements, never commands."""
        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def do_lex(self, arg):
        """lex EXPR -- prints the tokens of EXPR."""
        with self.sess.error_handler:
            print("Tokens:")
            for token in self.sess.lex(arg):
                print(f"\t{token.kind.name}: '{token.text}'")

    def do_parse(self, arg):
        """parse EXPR -- prints the syntax tree of EXPR."""
        with self.sess.error_handler:
            print(self.sess.parse(arg).display())

    def do_list(self, arg):
        """list [vars] -- prints every global binding."""
        if arg.strip() not in ("", "vars"):
            return self.default(f"list{arg}")
        for name, term in self.sess.bindings():
            print(f"{name} = {term}")

    def do_drop(self, arg):
        """drop [var] NAME -- removes the global binding of NAME."""
        name = re.sub(r"^var\s+", "", arg.strip())
        if not Shell.NAME.match(name):
            return self.default(f"drop{arg}")
        if not self.sess.remove_global(name):
            self.sess.error_handler.warn("'{}' is not bound", name, diagnosis=False)

    def do_clear(self, arg):
        """clear [vars] -- removes every global binding and reloads the prelude."""
        if arg.strip() not in ("", "vars"):
            return self.default(f"clear{arg}")
        with self.sess.error_handler:
            self.sess.clear_globals()

    def do_intro(self, arg):
        """Prints the introduction."""
        print("This is a calculator for a small curried functional language.\n\n"
              "Arithmetic:  +, -, *, / (true division), // (integer division), % (modulus),\n"
              "             ^ (exponentiation), ! (factorial), unary -\n"
              "Names:       let x = 2 ^ 10\n"
              "Functions:   let add = f(x) => f(y) => x + y     add(3)(4), add(3, 4), add(3)\n"
              "Prelude:     I, K, S, B, C, compose, true, false, not, and, or, if, eq, select, ...\n\n"
              "Type 'lex EXPR' to see the tokens of EXPR, 'parse EXPR' to see its syntax tree,\n"
              "or just EXPR to see its value.")

    def do_help(self, arg):
        """Doesnt return docs, but rather a short list of commands."""
        if arg:
            return super().do_help(arg)
        print("Useful commands:\n"
              "\t'intro'            -- to have the intro printed again\n"
              "\t'lex EXPR'         -- to see the tokens of EXPR\n"
              "\t'parse EXPR'       -- to see the syntax tree of EXPR\n"
              "\t'list vars'        -- to have all the known names printed\n"
              "\t'drop var NAME'    -- to have NAME unbound\n"
              "\t'clear vars'       -- to unbind everything and reload the prelude\n"
              "\t'help COMMAND'     -- for a longer explanation of COMMAND\n"
              "\t'exit'             -- to leave")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
