"""RosterFlow: monthly duty-roster workbooks generated from user templates."""
