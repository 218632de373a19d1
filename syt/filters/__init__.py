"""Filters that condense the output of playwright, pnpm, poetry, prisma, pytest, ruff, tsc, vitest, yarn and file reads."""