#!/usr/bin/env python3

from quizdeck import Bank
from quizdeck.session import ShufflePolicy
from quizdeck.terminal import format_view
from quizdeck.quiz import build_view
from quizdeck.reveal import QuestionState, SelectOption

def main():
    # Load the bank
    print("Loading question bank for quiz demo...")
    bank = Bank.load_from_file("./data/sample_bank.txt")
    print(bank)
    print()

    policy = ShufflePolicy(seed=7)
    presentations = policy.presentations(bank.entries)

    # Show what a couple of presentations look like, answered and unanswered
    for _ in range(2):
        presentation = next(presentations)
        state = QuestionState(presentation.entry.question)
        print("=== Before answering ===")
        print("\n".join(format_view(build_view(presentation, state))))

        if presentation.entry.question.is_multiple_choice:
            state.handle(SelectOption("A"))
        else:
            state.toggle()
        print("\n=== After answering ===")
        print("\n".join(format_view(build_view(presentation, state))))
        print()

    print("To start an actual quiz, run:")
    print("  python scripts/start_quiz.py data/sample_bank.txt")

if __name__ == "__main__":
    main()
