"""Handles interactive/command-line mode for the Cobalt interpreter. Uses cmd as backend."""

import cmd

from cobalt.lang.error import ErrorHandler
from cobalt.lang.lexical import TokenType, scan_tokens


class Shell(cmd.Cmd):
    """Cobalt interpreter shell."""
    intro = "Cobalt interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def preprocess_line(line):
        """Returns line and whether it leaves a block open, in which case it must be continued before it can run. Braces
        are counted on tokens, so the ones inside strings or comments are ignored. Faults are left for the real run.
        """
        types = [token.type for token in scan_tokens(line, ErrorHandler(echo=False))]
        return line, types.count(TokenType.LEFT_BRACE) > types.count(TokenType.RIGHT_BRACE)

    def default(self, line):
        """Executes arbitrary Cobalt source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = Shell.preprocess_line(self._tmp_line + line + "\n")

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.error_handler.reset()
            self.sess.run(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Cobalt interpreter!\n\n"
              "Cobalt has numbers, strings, true, false and nil, the usual arithmetic and comparison \n"
              "operators, variables and { } blocks that open a new scope.\n\n"
              "Try it out by typing 'var greeting = \"hi\";'. This binds the string 'hi' to the \n"
              "name 'greeting'. Next, try typing 'print greeting * 3;'. A variable declared \n"
              "with 'var name? = nil;' may hold nil, others may not.")

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
