"""Handles interactive/command-line mode for jsinterp. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """jsinterp shell."""
    intro = "jsinterp :: JavaScript subset\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary jsinterp source."""
        line = self._tmp_line + line

        if self.sess.needs_continuation(line):
            self._tmp_line = line + "\n"
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.run(line)
            print(self.sess.pop(), file=self.stdout)

    def onecmd(self, line):
        """Lines that continue a previous one bypass command parsing."""
        if self._tmp_line:
            return self.default(line)
        return super().onecmd(line)

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to jsinterp!\n\n"
              "jsinterp runs a small subset of JavaScript: numbers, strings, arithmetic, `let`, \n"
              "blocks, `if`/`else` and functions with `return`.\n\n"
              "Try it out by typing 'function inc(a) { return a + 1; }'. Next, try typing \n"
              "'inc(41)'. This will call 'inc' with 41, giving 42 as the result. Bindings \n"
              "persist until you type 'exit'.", file=self.stdout)

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print(file=self.stdout)
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
