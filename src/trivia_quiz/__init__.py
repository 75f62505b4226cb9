"""Terminal multiple-choice trivia quiz."""
