# Mail templates package init
